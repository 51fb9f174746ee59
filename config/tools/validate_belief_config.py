# config/tools/validate_belief_config.py

import sys           # for exit codes
from pprint import pprint  # for structured printing

# make src discoverable if running as a script
from pathlib import Path
# __file__ is .../config/tools/validate_belief_config.py
# parents[2] is the project root; append ROOT/src
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(PROJECT_ROOT / "src"))

from env.loader import DEFAULT_CONFIG_PATH, load_belief_config  # import our loader


def main() -> None:
    """Load and print the resolved belief config, failing fast on errors."""
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH
    try:
        cfg = load_belief_config(path)
    except (OSError, ValueError) as e:
        print("Belief config validation FAILED:", file=sys.stderr)
        print(repr(e), file=sys.stderr)
        sys.exit(1)                          # non-zero exit: CI will mark as failed

    print(f"Belief config validation OK: {path}")
    pprint(cfg)


if __name__ == "__main__":
    main()
