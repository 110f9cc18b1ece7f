# Shared helpers for the Codemart backend
