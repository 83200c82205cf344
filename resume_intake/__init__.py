"""Resume intake: best-effort extraction of candidate records from uploaded resumes."""
