"""Application layer – scheduling and the error-budget monitor."""
