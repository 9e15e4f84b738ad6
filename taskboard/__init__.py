"""taskboard: Kanban board and todo list persistence over a hosted Supabase database."""
