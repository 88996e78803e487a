"""Client-side computations over fetched records, plus per-view state holders."""
