"""Information estimators and active information storage calculators."""
