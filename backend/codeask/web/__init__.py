"""HTTP surface for codeask."""
