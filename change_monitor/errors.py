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


class ChangeMonitorError(Exception):
    """Base exception class for the change monitor."""


class ConfigurationError(ChangeMonitorError):
    """Raised when the monitor configuration is missing or invalid."""

    def __init__(self, text: str):
        self.message = text
        super().__init__(self.message)


class WatchRootError(ChangeMonitorError):
    """Raised when the watch root is missing or not a directory."""

    def __init__(self, path: str):
        self.message = f'watch root {path} does not exist or is not a directory'
        super().__init__(self.message)
