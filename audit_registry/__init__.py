"""Environmental audit registry: fee-charged admission of content-addressed audit records."""
