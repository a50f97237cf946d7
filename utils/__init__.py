# Shared helpers for the MaintMENA backend
