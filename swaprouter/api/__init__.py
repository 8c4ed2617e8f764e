"""HTTP surface for the swap router."""
