"""
Copyright 2024, Zep Software, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""


class ContentStore:
    """Last known full text of each watched file.

    Not synchronized on its own; callers hold the engine lock.
    """

    def __init__(self):
        self._contents: dict[str, str] = {}

    def get(self, file_name: str) -> str | None:
        return self._contents.get(file_name)

    def set(self, file_name: str, text: str) -> None:
        self._contents[file_name] = text

    def snapshot(self) -> dict[str, str]:
        return dict(self._contents)

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._contents

    def __len__(self) -> int:
        return len(self._contents)
