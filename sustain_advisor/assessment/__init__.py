"""
Assessment session core: score merging, stage progress, session lifecycle.

Modules
-------
scores  : default_scores() + merge_scores() — pure score accumulator.
stages  : STAGE_PROGRESS + stage_progress() / is_complete() / stage_status().
store   : SessionStore — in-memory keyed store with TTL eviction.
service : AssessmentService — start / submit_turn / get_result driver.
"""
