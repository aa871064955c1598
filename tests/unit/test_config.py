import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import yaml

from config.loader import ConfigLoader
from config.profiles import ConfigError, load_configuration, read_config_file

GLOBALS = {
    "default": "dev",
    "driver-name": "SnowflakeDSIIDriver",
    "driver-path": "/opt/snowflake/lib/libSnowflake.so",
}

DEV = {
    "oauth": True,
    "account": "xy12345.us-east-1",
    "database": "ANALYTICS",
    "warehouse": "COMPUTE_WH",
    "role": "ANALYST",
    "odbc-path": "/tmp/odbc",
    "okta-org": "https://example.okta.com/",
    "issuer-url": "https://example.okta.com/oauth2/default",
    "client-id": "0oa-test-client",
    "redirect-uri": "https://example.com/callback",
    "username": "jane@example.com",
}


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.config_file = Path(self.tmp.name) / "config.yml"
        self.loader = ConfigLoader(env_path=str(Path(self.tmp.name) / ".env"))

        # keep GSC_ variables from the developer's shell out of the tests
        env = {key: value for key, value in os.environ.items() if not key.startswith("GSC_")}
        patcher = patch.dict(os.environ, env, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def write_config(self, data):
        self.config_file.write_text(yaml.safe_dump(data))

    def load(self, **kwargs):
        kwargs.setdefault("loader", self.loader)
        kwargs.setdefault("in_docker", False)
        return load_configuration(self.config_file, **kwargs)


class TestLoadConfiguration(ConfigTestCase):
    def test_default_profile_from_file(self):
        self.write_config({**GLOBALS, "dev": DEV})

        config = self.load()

        self.assertEqual(config.profile_name, "dev")
        self.assertEqual(config.default_profile, "dev")
        self.assertEqual(config.driver_name, "SnowflakeDSIIDriver")
        self.assertTrue(config.profile.oauth)
        self.assertEqual(config.profile.okta_org, "https://example.okta.com")
        self.assertEqual(config.profile.schema_name, "PUBLIC")
        self.assertEqual(config.profile.threads, 10)

    def test_named_profile(self):
        prod = {**DEV, "account": "prod123", "oauth": False}
        self.write_config({**GLOBALS, "dev": DEV, "prod": prod})

        config = self.load(profile_name="prod")

        self.assertEqual(config.profile_name, "prod")
        self.assertEqual(config.default_profile, "dev")
        self.assertEqual(config.profile.account, "prod123")
        self.assertFalse(config.profile.oauth)

    def test_fallback_profile_when_file_names_none(self):
        self.write_config({"driver-name": "d", "driver-path": "/p", "dev": DEV})
        self.assertEqual(self.load().profile_name, "dev")

    def test_precedence_flag_over_env_over_file(self):
        self.write_config({**GLOBALS, "dev": DEV})

        with patch.dict(os.environ, {"GSC_ROLE": "ENV_ROLE", "GSC_WAREHOUSE": "ENV_WH"}):
            config = self.load(overrides={"role": "FLAG_ROLE", "database": None})

        self.assertEqual(config.profile.role, "FLAG_ROLE")
        self.assertEqual(config.profile.warehouse, "ENV_WH")
        self.assertEqual(config.profile.database, "ANALYTICS")

    def test_env_can_set_globals(self):
        self.write_config({"default": "dev", "dev": DEV})

        with patch.dict(os.environ, {"GSC_DRIVER_NAME": "EnvDriver", "GSC_DRIVER_PATH": "/env/lib.so"}):
            config = self.load()

        self.assertEqual(config.driver_name, "EnvDriver")
        self.assertEqual(config.driver_path, "/env/lib.so")

    def test_everything_from_flags_without_file(self):
        overrides = {**DEV, "driver-name": "d", "driver-path": "/p", "oauth": False}

        config = self.load(overrides=overrides)

        self.assertEqual(config.profile.account, "xy12345.us-east-1")

    def test_odbc_path_expands_home(self):
        self.write_config({**GLOBALS, "dev": {**DEV, "odbc-path": "~/Library/ODBC"}})
        self.assertEqual(self.load().profile.odbc_path, str(Path("~/Library/ODBC").expanduser()))


class TestValidation(ConfigTestCase):
    def test_missing_required_field(self):
        profile = dict(DEV)
        del profile["warehouse"]
        self.write_config({**GLOBALS, "dev": profile})

        with self.assertRaises(ConfigError) as ctx:
            self.load()

        self.assertIn("Parameter warehouse is required", str(ctx.exception))
        self.assertEqual(ctx.exception.fields, ["warehouse"])

    def test_missing_driver_name(self):
        self.write_config({"default": "dev", "driver-path": "/p", "dev": DEV})

        with self.assertRaises(ConfigError) as ctx:
            self.load()

        self.assertIn("Parameter driver-name is required", str(ctx.exception))

    def test_username_must_be_email(self):
        self.write_config({**GLOBALS, "dev": {**DEV, "username": "jane"}})

        with self.assertRaises(ConfigError) as ctx:
            self.load()

        self.assertEqual(ctx.exception.fields, ["username"])

    def test_okta_org_must_be_url(self):
        self.write_config({**GLOBALS, "dev": {**DEV, "okta-org": "example.okta.com"}})

        with self.assertRaises(ConfigError) as ctx:
            self.load()

        self.assertEqual(ctx.exception.fields, ["okta-org"])

    def test_oauth_requires_okta_fields(self):
        profile = dict(DEV)
        del profile["client-id"]
        self.write_config({**GLOBALS, "dev": profile})

        with self.assertRaises(ConfigError) as ctx:
            self.load()

        self.assertIn("client-id", str(ctx.exception))

    def test_okta_fields_optional_without_oauth(self):
        profile = {key: value for key, value in DEV.items() if key not in ("okta-org", "client-id")}
        profile["oauth"] = False
        self.write_config({**GLOBALS, "dev": profile})

        config = self.load()

        self.assertIsNone(config.profile.client_id)

    def test_invalid_yaml(self):
        self.config_file.write_text("dev: [unclosed\n")
        with self.assertRaises(ConfigError):
            self.load()

    def test_non_mapping_file(self):
        self.config_file.write_text("- a\n- b\n")
        with self.assertRaises(ConfigError):
            read_config_file(self.config_file)

    def test_missing_file_reads_empty(self):
        self.assertEqual(read_config_file(Path(self.tmp.name) / "absent.yml"), {})


class TestDocker(ConfigTestCase):
    def test_docker_supplies_odbc_path_when_unset(self):
        profile = dict(DEV)
        del profile["odbc-path"]
        self.write_config({**GLOBALS, "dev": profile})

        config = self.load(in_docker=True)

        self.assertEqual(config.profile.odbc_path, "/root/Library/ODBC")

    def test_docker_keeps_configured_odbc_path(self):
        self.write_config({**GLOBALS, "dev": DEV})
        self.assertEqual(self.load(in_docker=True).profile.odbc_path, "/tmp/odbc")


class TestConfigLoader(ConfigTestCase):
    def test_env_name(self):
        self.assertEqual(self.loader.env_name("okta-org"), "GSC_OKTA_ORG")

    def test_typed_values(self):
        with patch.dict(os.environ, {
            "GSC_MFA_MAX_WAIT": "30",
            "GSC_VERIFY_STATE": "false",
            "GSC_HTTP_TIMEOUT": "not-a-number",
        }):
            self.assertEqual(self.loader.get("MFA_MAX_WAIT", 300.0), 30.0)
            self.assertFalse(self.loader.get("VERIFY_STATE", True))
            self.assertEqual(self.loader.get("HTTP_TIMEOUT", 10.0), 10.0)

    def test_default_when_unset(self):
        self.assertEqual(self.loader.get("KEYRING_SERVICE", "gimme-snowflake-creds"), "gimme-snowflake-creds")
        self.assertIsNone(self.loader.get_raw("KEYRING_SERVICE"))

    def test_dotenv_file_is_loaded(self):
        env_file = Path(self.tmp.name) / "custom.env"
        env_file.write_text("GSC_OAUTH_SCOPE=session:role:ANALYST\n")

        loader = ConfigLoader(env_path=str(env_file))

        self.assertEqual(loader.get("OAUTH_SCOPE", "session:role-any"), "session:role:ANALYST")
