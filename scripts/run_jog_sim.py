#!/usr/bin/env python3
"""Standalone jog simulation, no engine or controllers required.

Tests the full pipeline:
  ScriptedOperator -> JogController -> ArticulationBackend / BoneRotationBackend

Usage:
    python3 scripts/run_jog_sim.py
    python3 scripts/run_jog_sim.py --variant bone_jog
    python3 scripts/run_jog_sim.py --duration 10 --realtime
"""

import sys
from pathlib import Path

# Add project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pendant_teleop.simulators.sim_runner import main

if __name__ == "__main__":
    main()
