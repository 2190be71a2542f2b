"""
Tests for lock configuration.

Validates:
1. LockConfig defaults and validation
2. Host option mapping (lock.duration etc.)
3. CONTENT_LOCK_* environment variables
4. Command-line overrides
5. Custom exception hierarchy
"""

import argparse

import pytest

from content_lock.core.config import DEFAULT_LOCK_CONFIG, BreakPolicy, LockConfig
from content_lock.core.exceptions import (
    ConfigurationError,
    ContentLockError,
    NotAuthenticatedError,
    PermissionDeniedError,
    StoreConflictError,
)


class TestLockConfig:
    """Test LockConfig defaults and validation"""

    def test_defaults(self):
        config = LockConfig()
        assert config.duration_seconds == 120
        assert config.file_name == ".lock"
        assert config.file_format == "yaml"
        assert config.break_policy is BreakPolicy.PERMISSIVE
        assert config.detect_conflicts is True
        assert DEFAULT_LOCK_CONFIG == config

    def test_to_dict(self):
        assert LockConfig(break_policy=BreakPolicy.REJECT_OWNER).to_dict() == {
            "duration_seconds": 120,
            "file_name": ".lock",
            "file_format": "yaml",
            "break_policy": "reject_owner",
            "detect_conflicts": True,
        }

    @pytest.mark.parametrize(
        "kwargs, field",
        [
            ({"duration_seconds": -1}, "duration_seconds"),
            ({"duration_seconds": "120"}, "duration_seconds"),
            ({"duration_seconds": True}, "duration_seconds"),
            ({"file_name": ""}, "file_name"),
            ({"file_name": "sub/.lock"}, "file_name"),
            ({"file_format": "xml"}, "file_format"),
            ({"break_policy": "permissive"}, "break_policy"),
        ],
    )
    def test_invalid_values(self, kwargs, field):
        with pytest.raises(ConfigurationError) as exc_info:
            LockConfig(**kwargs)
        assert exc_info.value.field == field


class TestFromOptions:
    """Test host application option lookup"""

    def test_duration_option(self):
        config = LockConfig.from_options({"lock.duration": 300, "unrelated": "x"})
        assert config.duration_seconds == 300
        assert config.file_name == ".lock"

    def test_all_options(self):
        config = LockConfig.from_options(
            {
                "lock.duration": "45",
                "lock.file": ".editlock",
                "lock.format": "JSON",
                "lock.breakPolicy": "reject-owner",
                "lock.detectConflicts": "off",
            }
        )
        assert config == LockConfig(
            duration_seconds=45,
            file_name=".editlock",
            file_format="json",
            break_policy=BreakPolicy.REJECT_OWNER,
            detect_conflicts=False,
        )

    def test_missing_options_keep_base(self):
        base = LockConfig(duration_seconds=10)
        assert LockConfig.from_options({}, base=base) is not base
        assert LockConfig.from_options({}, base=base) == base

    def test_invalid_option(self):
        with pytest.raises(ConfigurationError, match="Expected an integer") as exc_info:
            LockConfig.from_options({"lock.duration": "two minutes"})
        assert exc_info.value.field == "duration_seconds"


class TestFromEnv:
    """Test CONTENT_LOCK_* environment variables"""

    def test_explicit_environ(self):
        config = LockConfig.from_env(
            {"CONTENT_LOCK_DURATION": "600", "CONTENT_LOCK_DETECT_CONFLICTS": "yes", "PATH": "/bin"}
        )
        assert config.duration_seconds == 600
        assert config.detect_conflicts is True

    def test_empty_values_are_ignored(self):
        assert LockConfig.from_env({"CONTENT_LOCK_DURATION": ""}) == LockConfig()

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("CONTENT_LOCK_BREAK_POLICY", "reject_owner")
        monkeypatch.setenv("CONTENT_LOCK_FORMAT", "json")

        config = LockConfig.from_env(load_dotenv_file=False)

        assert config.break_policy is BreakPolicy.REJECT_OWNER
        assert config.file_format == "json"

    def test_invalid_boolean(self):
        with pytest.raises(ConfigurationError, match="Expected a boolean"):
            LockConfig.from_env({"CONTENT_LOCK_DETECT_CONFLICTS": "maybe"})

    def test_unknown_policy(self):
        with pytest.raises(ConfigurationError, match="Unknown break policy") as exc_info:
            LockConfig.from_env({"CONTENT_LOCK_BREAK_POLICY": "anyone"})
        assert "permissive" in str(exc_info.value)


class TestFromArgs:
    """Test command-line overrides"""

    def test_only_given_arguments_override(self):
        base = LockConfig(duration_seconds=30, file_format="json")
        args = argparse.Namespace(duration=90, lock_file=None, format=None, break_policy=None, detect_conflicts=None)

        config = LockConfig.from_args(args, base=base)

        assert config.duration_seconds == 90
        assert config.file_format == "json"

    def test_missing_attributes(self):
        assert LockConfig.from_args(argparse.Namespace()) == LockConfig()


class TestCustomExceptions:
    """Test the custom exception hierarchy"""

    def test_base_class_formats_details(self):
        error = ContentLockError("Test error", details="Additional details")
        assert error.message == "Test error"
        assert str(error) == "Test error: Additional details"
        assert str(ContentLockError("Only message")) == "Only message"

    def test_hierarchy(self):
        for error in (
            ConfigurationError("bad", field="x"),
            NotAuthenticatedError(),
            PermissionDeniedError("denied", resource_id="/a"),
            StoreConflictError("/tmp/.lock"),
        ):
            assert isinstance(error, ContentLockError)

    def test_not_authenticated_default_message(self):
        assert str(NotAuthenticatedError()) == "No user authenticated."

    def test_store_conflict_names_path(self):
        error = StoreConflictError("/srv/content/.lock")
        assert error.path == "/srv/content/.lock"
        assert "/srv/content/.lock" in str(error)
