"""ZWO Workout Editor: segment model, metrics and .zwo codec."""
