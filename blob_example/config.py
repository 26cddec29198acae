#!/usr/bin/env python3
"""
Configuration Management for the Blob Storage Walkthrough
"""

import copy
import json
import os
from typing import Any, Dict, Optional

CONNECTION_STRING_ENV = "AZURE_STORAGE_CONNECTION_STRING"


class ConfigurationManager:
    """Manages configuration for the blob storage walkthrough"""

    DEFAULT_CONFIG = {
        "storage": {
            "connection_string": "",
            "container_name": "sentences",
            "public_access": "container",  # container, blob, or off
        },
        "blob": {
            "content": "You can never plan the future by the past.",
            "extension": ".txt",
            "content_type": "text/plain",
            "content_language": "en-us",
            "metadata": {"author": "anonymous", "date": "unknown"},
        },
        "output": {"local_file": "sentence.txt"},
        "cleanup": {"delete_blob": True, "delete_container": True},
        "error_handling": {"error_log": "blob_example_errors.log"},
    }

    def __init__(
        self, config_file: Optional[str] = None, overrides: Optional[dict] = None
    ):
        # Apply configuration in proper order: defaults -> config_file -> CLI args
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        if config_file:
            self.load_config(config_file)
        if overrides:
            self._deep_update(self.config, overrides)

        # Ensure directories exist
        self._ensure_directories()

    def load_config(self, config_file: str):
        """Load configuration from JSON file"""
        try:
            with open(config_file, "r") as f:
                file_config = json.load(f)
            self._deep_update(self.config, file_config)
        except Exception as e:
            print(f"Warning: Could not load config file: {e}")

    def _deep_update(self, original: Dict, update: Dict):
        """Recursively update dictionary, ignoring None values"""
        for key, value in update.items():
            if value is None:
                # Skip None values to avoid overriding existing configuration
                continue
            # Metadata is replaced as a whole, never merged key by key
            if isinstance(value, dict) and key in original and key != "metadata":
                self._deep_update(original[key], value)
            else:
                original[key] = value

    def _ensure_directories(self):
        """Ensure the directory of the local download file exists"""
        directory = os.path.dirname(self.config["output"]["local_file"])
        if directory:
            os.makedirs(directory, exist_ok=True)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with dot notation"""
        keys = key.split(".")
        current = self.config
        for k in keys:
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return default
        return current

    def get_connection_string(self) -> str:
        """Connection string from configuration, else from the environment"""
        return self.get("storage.connection_string") or os.environ.get(
            CONNECTION_STRING_ENV, ""
        )

    def save_config(self, config_file: str):
        """Save current configuration to file"""
        try:
            with open(config_file, "w") as f:
                json.dump(self.config, f, indent=2)
            return True
        except Exception as e:
            print(f"Error saving config: {e}")
            return False

    def __repr__(self):
        """Pretty print the config as a JSON string"""
        return json.dumps(self.config, indent=2)

    def dump_config_json(self):
        """Dump the current configuration as JSON to stdout"""
        import sys

        json.dump(self.config, sys.stdout, indent=2)
        print()  # Add newline for better formatting
