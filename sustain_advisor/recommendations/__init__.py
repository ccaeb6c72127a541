"""
Recommendation engine: scores investment tracks against assessment scores
and produces ranked recommendations with human-readable reasons.

Modules
-------
matcher  : MatchComponents dataclass + compute_match() + build_reason()
           — pure functions, no I/O.
ranker   : TrackRecommendation dataclass + score_tracks() + recommend_tracks().
profile  : build_assessment_result() — investor profile and result payload.
phrases  : en / zh phrase tables for generated text.
reporter : write_result_json() + write_recommendation_csv() — file output.
"""
