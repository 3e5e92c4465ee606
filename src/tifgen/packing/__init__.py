"""MGIc container layout, writing and inspection."""
