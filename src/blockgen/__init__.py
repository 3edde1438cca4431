"""Block graph to promise-chain program generator."""
