"""HTTP surface: admin API and HTTP transports."""
