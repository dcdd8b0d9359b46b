"""Payments: PayMongo checkout sessions, webhooks and refunds."""
