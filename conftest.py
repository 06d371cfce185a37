"""
Root pytest configuration for CareFlow.

Sets up Python path and test environment variables for all test directories.
"""

import os
import sys
from pathlib import Path

# Set test environment variables before anything else imports settings
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Tests assert on default engine and logging settings
for key in list(os.environ):
    if key.startswith(("RISK_ENGINE_", "OBSERVABILITY_")):
        del os.environ[key]

# Project root
project_root = Path(__file__).parent

# Add src directory to path for imports (careflow_common, careflow_risk)
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
