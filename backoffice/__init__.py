"""Back-office services for marketplace promotions and notifications."""
