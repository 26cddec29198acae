#!/usr/bin/env python3
"""
Error Handling System for the Blob Storage Walkthrough
"""

import traceback
from datetime import datetime


class ErrorHandler:
    """Records the outcome of each walkthrough step in a log file"""

    def __init__(self, config: dict):
        self.config = config
        self.log_file = config.get("error_log", "blob_example_errors.log")

        # Ensure log file exists
        with open(self.log_file, "a") as f:
            f.write(f"\n{'='*50}\n")
            f.write(f"Blob Walkthrough Log - {datetime.now()}\n")
            f.write(f"{'='*50}\n\n")

    def log_success(self, step: str, detail: str = ""):
        """Log a completed step"""
        with open(self.log_file, "a") as f:
            f.write(f"SUCCESS: {datetime.now()} - {step} {detail}".rstrip() + "\n")

    def log_skip(self, step: str, reason: str):
        """Log skipped steps"""
        with open(self.log_file, "a") as f:
            f.write(f"SKIP: {datetime.now()} - {step} - {reason}\n")

    def log_exception(self, step: str, exception: Exception):
        """Log exceptions with stack trace"""
        with open(self.log_file, "a") as f:
            f.write(f"EXCEPTION: {datetime.now()} - {step}\n")
            f.write(f"  {type(exception).__name__}: {str(exception)}\n")
            f.write(
                "  "
                + "".join(
                    traceback.format_exception(
                        type(exception), exception, exception.__traceback__
                    )
                )
                + "\n"
            )
