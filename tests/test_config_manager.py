"""Tests for configuration management."""

import json
import os
import shutil
import tempfile
import unittest

import yaml

from momo_parser.models.core import ParserConfig, RawMessage
from momo_parser.parsers.sms_parser import SmsParser
from momo_parser.utils.config_manager import ConfigManager, get_default_config_manager


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager"""

    def setUp(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, 'test_config.json')

    def tearDown(self):
        """Clean up test fixtures"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_json(self, data):
        with open(self.config_file, 'w') as f:
            json.dump(data, f)

    def test_default_config_loading(self):
        """Test loading default configuration when no file exists"""
        manager = ConfigManager(config_path="nonexistent_file.json")
        config = manager.load_config()

        self.assertIsInstance(config, ParserConfig)
        self.assertIn("KES", config.currency_codes)
        self.assertIn("M-PESA", config.brand_keywords)
        self.assertEqual(config.airtime_counterparty, "Airtime Recharge")
        self.assertTrue(config.detect_categories)

    def test_config_file_loading(self):
        """Test loading configuration from JSON file"""
        self._write_json({
            "currency_codes": ["RWF", "KES"],
            "airtime_counterparty": "Airtime",
            "detect_categories": False
        })

        config = ConfigManager(config_path=self.config_file).load_config()

        self.assertEqual(config.currency_codes, ["RWF", "KES"])
        self.assertEqual(config.airtime_counterparty, "Airtime")
        self.assertFalse(config.detect_categories)
        self.assertIn("M-PESA", config.brand_keywords)

    def test_yaml_config_loading(self):
        """Test loading configuration from YAML file"""
        yaml_file = os.path.join(self.temp_dir, 'config.yml')
        with open(yaml_file, 'w') as f:
            yaml.dump({"brand_keywords": {"Chipper Cash": r"\bchipper\s+cash\b"}}, f)

        config = ConfigManager(config_path=yaml_file).load_config()

        self.assertEqual(config.brand_keywords, {"Chipper Cash": r"\bchipper\s+cash\b"})

    def test_invalid_config_falls_back_to_defaults(self):
        """Invalid values are rejected and defaults are used"""
        for bad in [
            {"currency_codes": "KES"},
            {"currency_codes": []},
            {"brand_keywords": {"Broken": "(unclosed"}},
            {"detect_categories": "yes"},
            {"airtime_counterparty": ""},
        ]:
            self._write_json(bad)
            config = ConfigManager(config_path=self.config_file).load_config()
            self.assertEqual(config, ParserConfig(), f"Accepted invalid config {bad}")

    def test_validate_config_data(self):
        manager = ConfigManager()
        with self.assertRaises(ValueError):
            manager._validate_config_data(["not", "a", "dict"])
        with self.assertRaises(ValueError):
            manager._validate_config_data({"brand_keywords": {"X": 5}})

        manager._validate_config_data({"currency_codes": ["KES"], "detect_categories": True})

    def test_config_caching(self):
        """Test configuration caching and reload"""
        self._write_json({"airtime_counterparty": "First"})
        manager = ConfigManager(config_path=self.config_file)
        self.assertEqual(manager.load_config().airtime_counterparty, "First")

        self._write_json({"airtime_counterparty": "Second"})
        self.assertEqual(manager.load_config().airtime_counterparty, "First")
        self.assertEqual(manager.load_config(force_reload=True).airtime_counterparty, "Second")

        manager.reset_config()
        self.assertEqual(manager.load_config().airtime_counterparty, "Second")

    def test_update_config(self):
        manager = ConfigManager(config_path="nonexistent_file.json")
        manager.update_config({"airtime_counterparty": "Top Up", "unknown_key": 1})

        config = manager.load_config()
        self.assertEqual(config.airtime_counterparty, "Top Up")
        self.assertFalse(hasattr(config, "unknown_key"))

    def test_save_config_template(self):
        """Test generating configuration templates in both formats"""
        json_path = os.path.join(self.temp_dir, 'out', 'template.json')
        yaml_path = os.path.join(self.temp_dir, 'template.yml')
        manager = ConfigManager()

        manager.save_config_template(json_path)
        manager.save_config_template(yaml_path)

        with open(json_path) as f:
            json_data = json.load(f)
        with open(yaml_path) as f:
            yaml_data = yaml.safe_load(f)

        self.assertEqual(json_data, yaml_data)
        self.assertEqual(json_data["airtime_counterparty"], "Airtime Recharge")

        reloaded = ConfigManager(config_path=yaml_path).load_config()
        self.assertEqual(reloaded, ParserConfig())

    def test_default_config_manager(self):
        """Default manager searches the standard locations"""
        manager = get_default_config_manager()
        self.assertIsInstance(manager, ConfigManager)
        self.assertIsNone(manager.config_path)

    def test_brand_keywords_drive_acceptance(self):
        """A configured brand corroborates messages without a reference"""
        body = "Chipper Cash: You received USD 20.00 from Ama"

        default_parser = SmsParser()
        self.assertEqual(default_parser.parse(RawMessage(body=body)), [])

        yaml_file = os.path.join(self.temp_dir, 'brands.yaml')
        with open(yaml_file, 'w') as f:
            yaml.dump({"brand_keywords": {"Chipper Cash": r"\bchipper\s+cash\b"}}, f)

        parser = SmsParser(ConfigManager(config_path=yaml_file).load_config())
        records = parser.parse(RawMessage(body=body))

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].counterparty, "Ama")


if __name__ == '__main__':
    unittest.main()
