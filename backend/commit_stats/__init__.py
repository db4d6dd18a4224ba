"""GitHub commit activity aggregated by language and time period."""
