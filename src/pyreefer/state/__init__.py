"""State layer.

Owns the dashboard session state: the last good fleet snapshot, the
selected vehicle's historical window and the control inputs.
"""
