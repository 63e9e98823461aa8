"""Hardware-free collaborators for demos and tests."""
