"""Action event logger: template-based log records shipped to the console and Loki."""
