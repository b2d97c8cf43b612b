# awslogin/core - authentication orchestration core
"""
Core building blocks: settings, the exception base, the subprocess
boundary and the `auth` package.
"""
