"""Services composing the validation layer and the extraction engine."""
