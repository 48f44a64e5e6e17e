#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from nbbo_app.config.loader import ConfigLoader
from nbbo_app.config.validation import ConfigValidator, ValidationError
from nbbo_app.errors import ConfigurationError


def validate_run_config(config_dir: Optional[Path] = None,
                        overrides: Optional[Dict[str, Any]] = None) -> List[ValidationError]:
    """Validate the merged configuration for a run."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None

    print("🔍 Validating NBBO sync configuration...")

    all_valid = True

    print("\n📊 Validating config file over defaults...")
    try:
        errors = validate_run_config(config_dir)

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print("✅ Configuration file is valid")

    except ConfigurationError as e:
        print(f"❌ Error loading configuration: {e}")
        all_valid = False

    # Typical run-level overrides
    print("\n📋 Testing run-level overrides...")
    test_overrides = {
        "session": {
            "lag_seconds": 2,
            "symbols": ["AAA", "BBB"],
        },
        "nbbo": {
            "implied_price_bin_count": 10,
        },
    }

    try:
        loader = ConfigLoader.create(config_dir)
        config = loader.build_run_config(test_overrides)
        print("✅ Run override validation passed")
        print(f"  • window: {config.session.start_time}-{config.session.end_time}, "
              f"lag {config.session.lag_seconds}s")

    except ConfigurationError as e:
        print("❌ Run override validation failed:")
        for error in e.errors:
            print(f"  • {error.field}: {error.message}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
