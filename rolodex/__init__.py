"""Personal contact relationship manager."""
