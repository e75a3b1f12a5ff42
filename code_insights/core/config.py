"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    BITBUCKET_API_URL       - Reports API root (default: http://api.bitbucket.org/2.0/)
    BITBUCKET_PROXY_URL     - Forward proxy every request goes through (default: http://localhost:29418)
    BITBUCKET_REPO_OWNER    - Workspace / owner of the repository
    BITBUCKET_REPO_SLUG     - Repository slug, also used as the report name prefix
    BITBUCKET_COMMIT        - Commit SHA the report is attached to
    BITBUCKET_CLONE_DIR     - Local checkout root; annotation paths are made relative to it
    BITBUCKET_HTTP_TIMEOUT  - Per-request timeout in seconds (default: 30)

The BITBUCKET_* repository variables are the ones Bitbucket Pipelines exports
into every build step, so no extra setup is needed inside a pipeline.

Unlike a module of globals, the values are collected into one BitbucketConfig
that is handed to the API client explicitly.
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from code_insights.core.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_PROXY_URL,
)

load_dotenv()


class BitbucketConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    repo_owner: str
    repo_slug: str
    commit: str
    clone_dir: str
    base_url: str = DEFAULT_BASE_URL
    proxy_url: Optional[str] = DEFAULT_PROXY_URL
    timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, **overrides) -> "BitbucketConfig":
        """
        Build a config from BITBUCKET_* environment variables.

        Keyword overrides win over the environment; passing None for an
        override means "not given" and keeps the environment value.
        Raises pydantic.ValidationError when a required value is missing.
        """
        values = {
            "repo_owner": os.getenv("BITBUCKET_REPO_OWNER"),
            "repo_slug": os.getenv("BITBUCKET_REPO_SLUG"),
            "commit": os.getenv("BITBUCKET_COMMIT"),
            "clone_dir": os.getenv("BITBUCKET_CLONE_DIR"),
            "base_url": os.getenv("BITBUCKET_API_URL", DEFAULT_BASE_URL),
            "proxy_url": os.getenv("BITBUCKET_PROXY_URL", DEFAULT_PROXY_URL),
            "timeout": os.getenv("BITBUCKET_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
