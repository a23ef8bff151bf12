"""Tenor チャンネル素材取得・タグ順位計測ツール."""
