import pytest
from structlog.testing import capture_logs

from ideaflow.config import FeaturesConfig
from ideaflow.exceptions import RemoteError
from ideaflow.remote import ENHANCED_IDEA_GENERATION, FakeRemoteService, FeatureFlags

pytestmark = pytest.mark.anyio


async def test_defaults_enable_enhanced_generation() -> None:
    flags = FeatureFlags()

    assert await flags.is_enabled(ENHANCED_IDEA_GENERATION) is True
    assert await flags.is_enabled(ENHANCED_IDEA_GENERATION, context="standup") is False


async def test_disabled_context_wins_over_override(remote: FakeRemoteService) -> None:
    features = FeaturesConfig(
        overrides={"beta": True}, disabled_contexts={"beta": ["demo"]}
    )
    flags = FeatureFlags(features, remote)

    assert await flags.is_enabled("beta", context="demo") is False
    assert await flags.is_enabled("beta", context="other") is True
    assert remote.calls == []


async def test_override_skips_remote(remote: FakeRemoteService) -> None:
    remote.flags[("beta", None)] = True
    flags = FeatureFlags(FeaturesConfig(overrides={"beta": False}), remote)

    assert await flags.is_enabled("beta") is False
    assert remote.calls == []


async def test_remote_lookup_prefers_user_value(remote: FakeRemoteService) -> None:
    remote.flags[("beta", None)] = False
    remote.flags[("beta", "user-1")] = True
    flags = FeatureFlags(FeaturesConfig(), remote)

    assert await flags.is_enabled("beta", user_id="user-1") is True
    assert await flags.is_enabled("beta", user_id="user-2") is False


async def test_unknown_flag_is_off(remote: FakeRemoteService) -> None:
    assert await FeatureFlags(FeaturesConfig(), remote).is_enabled("missing") is False


async def test_no_remote_is_off() -> None:
    assert await FeatureFlags(FeaturesConfig()).is_enabled("beta") is False


async def test_remote_failure_is_off(remote: FakeRemoteService) -> None:
    remote.flags[("beta", None)] = True
    remote.fail("get_feature_flag", RemoteError("down"))

    with capture_logs() as logs:
        enabled = await FeatureFlags(FeaturesConfig(), remote).is_enabled("beta")

    assert enabled is False
    assert logs[0]["event"] == "flag_lookup_failed"
