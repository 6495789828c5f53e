"""mdxe — compile MDX documents with remote component and layout resolution."""

__version__ = "0.1.0"
