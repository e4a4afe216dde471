"""Submodule synchronization gateway.

Import from submodules:
- abc: SubmoduleUpdater
- types: SubmodulesUpdated, SubmoduleError
- real: RealSubmoduleUpdater
- fake: FakeSubmoduleUpdater
"""
