"""User-facing surfaces: argparse CLI and rich rendering."""
