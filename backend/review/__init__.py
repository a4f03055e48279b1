"""Review scheduling engine: session building, the card cursor and grading."""
