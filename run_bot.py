"""
Bot entrypoint.

Usage:
    python run_bot.py                  # every bot in BOTS (default: bumbles, discocowboy)
    python run_bot.py bumbles          # a single bot
    python run_bot.py discocowboy

Operator notes:
- This file should remain extremely small and boring.
- All configuration validation happens inside run_bots().
- If this file crashes, the error should be immediately obvious to the operator.
"""

import logging
import sys

from burlfret.bot import run_bots
from burlfret.core.errors import ConfigError


def main() -> None:
    keys = [a.strip().lower() for a in sys.argv[1:] if a.strip()] or None
    try:
        run_bots(keys)
    except KeyboardInterrupt:
        pass
    except ConfigError as exc:
        print(f"\n❌ Bot configuration error: {exc}")
        print("   Set the missing values in the environment or .env and try again.\n")
        sys.exit(1)
    except Exception:
        # Fail loud and early with a clear signal for operators.
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Discord bot failed to start.")
        print("\n❌ Discord bot failed to start.")
        print("   See error above. Most common causes:")
        print("   - BUMBLES_TOKEN / DISCOCOWBOY_TOKEN missing or not loaded into the environment")
        print("   - Invalid token (Discord rejected the login)")
        print("   - PORT already in use by another health server\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
