"""HoopForecast: NBA player points predictions versus sportsbook lines."""
