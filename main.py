#!/usr/bin/env python3
"""
Chart Viewer - Main Entry Point

Interactive viewer for imported market data payloads:
- Step-line price series grouped by partial key
- Drag-to-zoom with per-chart value ranges
- Synchronized cursor with value readout
- Toggleable legend and trade event markers

Usage:
    python main.py --data payload.json
    python main.py --data payload.json --no-show
"""

if __name__ == "__main__":
    import sys
    from src.cli.main import main
    sys.exit(main())
