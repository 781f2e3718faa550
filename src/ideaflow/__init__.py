"""ideaflow: resumable multi-step idea refinement workflows.

The package is organised around a small number of collaborators:

- ``ideaflow.idea``: the refinement workflow (document, cursor, navigator,
  step components, merge algorithm, remote save ladder).
- ``ideaflow.onboarding``: the onboarding step graph and controller.
- ``ideaflow.remote``: the remote data service boundary.
- ``ideaflow.utils``: durable key-value state stores and logging helpers.
- ``ideaflow.config``: layered TOML configuration.
"""

__version__ = "0.1.0"
