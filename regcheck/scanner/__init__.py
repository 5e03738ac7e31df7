"""Scanner — fan repositories out to a worker pool and check every manifest."""
