"""The XFS disk layout, virtual disk, inode table, label resolution and disk utilities."""