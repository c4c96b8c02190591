"""config_loading.py"""
from pathlib import Path

from figspec import load_spec, run

spec = load_spec(Path(__file__).parent / "greet.yaml")

if __name__ == "__main__":
    run(spec)
