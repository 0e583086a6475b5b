"""Target selection and the dive loop."""
