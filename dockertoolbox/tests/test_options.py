"""Tests for option schema resolution.

resolve_options() is the bridge between caller-facing option models and the
camelCase mapping the argument encoder consumes.
"""

import pytest
from pydantic import SecretStr, ValidationError

from dockertoolbox.codec.args import options_to_args
from dockertoolbox.options.base import NoOptions, resolve_options
from dockertoolbox.options.compose import (
    BuildOptions,
    DownOptions,
    EventsOptions,
    RunOptions,
    UpOptions,
)
from dockertoolbox.options.machine import (
    DRIVER_OPTIONS,
    AmazonEC2DriverOptions,
    AzureDriverOptions,
    DigitalOceanDriverOptions,
    EnvOptions,
    MachineOptions,
    VirtualBoxDriverOptions,
)


class TestResolveOptions:
    def test_none_is_empty(self):
        assert resolve_options(None, BuildOptions) == {}

    def test_empty_mapping_is_empty(self):
        assert resolve_options({}, BuildOptions) == {}

    def test_mapping_by_alias(self):
        assert resolve_options({"forceRm": True}, BuildOptions) == {"forceRm": True}

    def test_mapping_by_field_name(self):
        assert resolve_options({"force_rm": True}, BuildOptions) == {"forceRm": True}

    def test_mapping_keeps_supplied_order(self):
        resolved = resolve_options({"quiet": True, "noCache": True, "pull": True}, BuildOptions)
        assert list(resolved) == ["quiet", "noCache", "pull"]

    def test_mapping_none_values_are_dropped(self):
        assert resolve_options({"memory": None, "pull": True}, BuildOptions) == {"pull": True}

    def test_mapping_values_are_validated(self):
        resolved = resolve_options({"timeout": "30"}, DownOptions)
        assert resolved == {"timeout": 30}

    def test_unknown_key_raises(self):
        with pytest.raises(ValidationError, match="extra"):
            resolve_options({"forceRemove": True}, BuildOptions)

    def test_model_in_field_order_without_none(self):
        resolved = resolve_options(DownOptions(timeout=5, rmi="local"), DownOptions)
        assert resolved == {"rmi": "local", "volumes": False, "removeOrphans": False, "timeout": 5}
        assert list(resolved) == ["rmi", "volumes", "removeOrphans", "timeout"]

    def test_model_of_wrong_schema_raises(self):
        with pytest.raises(TypeError, match="Expected UpOptions"):
            resolve_options(DownOptions(), UpOptions)

    def test_no_options_schema(self):
        assert resolve_options({}, NoOptions) == {}
        with pytest.raises(ValidationError):
            resolve_options({"anything": True}, EventsOptions)


class TestComposeSchemas:
    def test_flat_map_keeps_scalar_types(self):
        options = BuildOptions(build_arg={"VERSION": "1.2", "JOBS": 4, "DEBUG": False})
        assert options.build_arg == {"VERSION": "1.2", "JOBS": 4, "DEBUG": False}

    def test_flat_map_rejects_nested_mapping(self):
        with pytest.raises(ValidationError):
            BuildOptions(build_arg={"A": {"B": "C"}})

    def test_run_publish_accepts_ports_and_strings(self):
        options = RunOptions(publish=[8080, "127.0.0.1:5432:5432"])
        assert options.publish == [8080, "127.0.0.1:5432:5432"]

    def test_up_options_encode(self):
        resolved = resolve_options(
            {"detach": True, "exitCodeFrom": "tests", "scale": {"worker": 2}}, UpOptions
        )
        assert options_to_args(resolved) == [
            "--detach", "--exit-code-from", "tests", "--scale", "worker=2",
        ]  # fmt: skip


class TestMachineSchemas:
    def test_global_options(self):
        resolved = resolve_options({"tlsCaCert": "/certs/ca.pem"}, MachineOptions)
        assert options_to_args(resolved) == ["--tls-ca-cert", "/certs/ca.pem"]

    def test_env_options(self):
        resolved = resolve_options(EnvOptions(shell="powershell"), EnvOptions)
        assert options_to_args(resolved) == ["--shell", "powershell"]

    def test_driver_flags_are_prefixed(self):
        resolved = resolve_options({"diskSize": 40000, "hostonlyNoDhcp": True}, VirtualBoxDriverOptions)
        assert options_to_args(resolved, prefix="virtualbox-") == [
            "--virtualbox-disk-size", "40000", "--virtualbox-hostonly-no-dhcp",
        ]  # fmt: skip

    def test_azure_requires_subscription(self):
        with pytest.raises(ValidationError):
            AzureDriverOptions()
        assert AzureDriverOptions(subscription_id="s").subscription_id == "s"

    @pytest.mark.parametrize(
        "driver",
        [
            "amazonec2",
            "azure",
            "digitalocean",
            "exoscale",
            "generic",
            "google",
            "hyperv",
            "openstack",
            "rackspace",
            "softlayer",
            "virtualbox",
            "vmwarevcloudair",
            "vmwarefusion",
            "vmwarevsphere",
        ],
    )
    def test_driver_registry(self, driver):
        assert driver in DRIVER_OPTIONS

    def test_every_driver_rejects_unknown_options(self):
        for schema in DRIVER_OPTIONS.values():
            with pytest.raises(ValidationError):
                schema.model_validate({"notAnOption": True})


class TestCredentialFields:
    def test_token_is_stored_as_secret(self):
        options = DigitalOceanDriverOptions(access_token="dop_v1_abc")
        assert isinstance(options.access_token, SecretStr)
        assert options.access_token.get_secret_value() == "dop_v1_abc"
        assert "dop_v1_abc" not in repr(options)

    def test_resolved_mapping_keeps_secret(self):
        resolved = resolve_options({"accessKey": "AKIA123", "region": "eu-west-1"}, AmazonEC2DriverOptions)
        assert isinstance(resolved["accessKey"], SecretStr)
        assert resolved["region"] == "eu-west-1"

    def test_global_tokens_are_secret(self):
        resolved = resolve_options({"githubApiToken": "ghp", "bugsnagApiToken": "bs"}, MachineOptions)
        assert all(isinstance(value, SecretStr) for value in resolved.values())
        assert options_to_args(resolved) == ["--github-api-token", "ghp", "--bugsnag-api-token", "bs"]
