"""Live Q&A organizer console: event directory, question moderation and join links."""
