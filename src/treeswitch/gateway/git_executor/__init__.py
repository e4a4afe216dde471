"""Git process execution gateway.

Import from submodules:
- abc: GitExecutor
- types: GitInvocation, GitResult and stream events
- real: RealGitExecutor
- fake: FakeGitExecutor
- dry_run: DryRunGitExecutor
- printing: PrintingGitExecutor
"""
