# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration management for the schema validator."""

import os
import logging
from dataclasses import dataclass

from .utils.logging_utils import configure_split_stream_logging


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ValidatorConfig:
    """Configuration class for schema compilation and evaluation."""
    max_depth: int = 1000
    strict: bool = False
    assert_formats: bool = False
    log_level: str = "INFO"
    print_level: str = "ERROR"
    cache_enabled: bool = True

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        return cls(
            max_depth=int(os.getenv('SCHEMA_VALIDATOR_MAX_DEPTH', '1000')),
            strict=_env_flag('SCHEMA_VALIDATOR_STRICT', 'false'),
            assert_formats=_env_flag('SCHEMA_VALIDATOR_ASSERT_FORMATS', 'false'),
            log_level=os.getenv('SCHEMA_VALIDATOR_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('SCHEMA_VALIDATOR_PRINT_LEVEL', 'ERROR'),
            cache_enabled=_env_flag('SCHEMA_VALIDATOR_CACHE_ENABLED', 'true'),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        configure_split_stream_logging(level=self.log_level, stderr_level=self.print_level, formatter=formatter)

        return logging.getLogger('schema_validator')


# Global configuration instance
validator_config = ValidatorConfig.from_env()
