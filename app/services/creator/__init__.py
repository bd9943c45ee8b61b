"""
Creator Studio — creator pipeline services
==========================================

Every public operation in this package is wrapped by
`app.services.creator.boundary.operation` and returns an
`OperationResult` (`{success, data | error}`); none of them raise.

Modules
-------
- settings_service      : CreatorSettings singleton (policy)
- eligibility_service   : access requests, grants, creator status
- quota_service         : per-day upload/storage accounting
- submission_service    : intake, add-episodes, owner edits
- publisher_service     : catalog materialisation with slug/title dedup
- moderation_service    : approve/reject saga
- strike_service        : strikes, suspension, limits, stats
- notification_service  : fire-and-forget creator inbox
"""
