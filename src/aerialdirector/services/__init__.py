"""Generation services.

- prompt_composer: photo -> director prompt (hosted text/vision model)
- video_jobs: director prompt + photo -> downloaded video (hosted video model)
"""
