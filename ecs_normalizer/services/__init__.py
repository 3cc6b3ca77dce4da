"""Processing services: core entry points, assembly and the batch shell."""
