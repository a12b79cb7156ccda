"""recurfix: recurrence rule construction, sanitizing and repair for imported appointments."""
