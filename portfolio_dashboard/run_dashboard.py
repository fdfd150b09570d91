"""Run the Streamlit portfolio tracker."""
import argparse
import os
import subprocess
import sys

HOME_ENV = "PORTFOLIO_TRACKER_HOME"
LOG_LEVEL_ENV = "PORTFOLIO_TRACKER_LOG_LEVEL"


def build_command(app_path: str, streamlit_args=()) -> list:
    return [sys.executable, "-m", "streamlit", "run", app_path, *streamlit_args]


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Launch the portfolio tracker dashboard.")
    parser.add_argument("--data-dir", help="folder holding snapshots.csv and positions.csv")
    parser.add_argument("--log-level", help="logging level, e.g. DEBUG")
    args, streamlit_args = parser.parse_known_args(argv)

    env = dict(os.environ)
    if args.data_dir:
        env[HOME_ENV] = os.path.abspath(os.path.expanduser(args.data_dir))
    if args.log_level:
        env[LOG_LEVEL_ENV] = args.log_level.upper()

    app_path = os.path.join(os.path.dirname(__file__), "app.py")
    return subprocess.call(build_command(app_path, streamlit_args), env=env)


if __name__ == "__main__":
    raise SystemExit(main())
