"""Voice receptionist for a dog grooming business, built on LiveKit Agents."""

__version__ = "0.1.0"
