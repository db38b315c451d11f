"""Plain-text rendering of API payloads for the terminal"""


def _when(value):
    if not value:
        return '-'
    # ISO timestamps: keep date and minutes
    return str(value).replace('T', ' ')[:16]


def _table(headers, rows):
    rows = [[str(cell) for cell in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
    line = '  '.join(h.ljust(w) for h, w in zip(headers, widths))
    out = [line, '  '.join('-' * w for w in widths)]
    out.extend('  '.join(cell.ljust(w) for cell, w in zip(row, widths)) for row in rows)
    return '\n'.join(out)


def render_user(user):
    lines = [
        f"{user.get('name')} <{user.get('email')}>",
        f"Role:       {user.get('role')}",
        f"Enrolled:   {len(user.get('enrolledClasses', []))} classes",
        f"Joined:     {_when(user.get('createdAt'))}",
        f"Last login: {_when(user.get('lastLogin'))}",
    ]
    if user.get('profilePicture'):
        lines.append(f"Picture:    {user['profilePicture']}")
    return '\n'.join(lines)


def render_class_list(classes):
    if not classes:
        return 'No classes found.'
    rows = []
    for c in classes:
        when = _when(c.get('schedule')) if c.get('type') == 'live' else c.get('duration', '')
        rows.append([c.get('_id'), c.get('title'), c.get('type'), c.get('instructor'),
                     c.get('category'), when, c.get('views', 0)])
    return _table(['ID', 'Title', 'Type', 'Instructor', 'Category', 'When/Length', 'Views'], rows)


def render_class(c):
    lines = [
        c.get('title', ''),
        '=' * len(c.get('title', '')),
        c.get('description', ''),
        '',
        f"Instructor: {c.get('instructor')}",
        f"Type:       {c.get('type')}",
        f"Category:   {c.get('category')}",
        f"Duration:   {c.get('duration')}",
    ]
    if c.get('type') == 'live':
        lines.append(f"Scheduled:  {_when(c.get('schedule'))}")
    lines.extend([
        f"Video:      {c.get('videoUrl')}",
        f"Views:      {c.get('views', 0)}",
        f"Students:   {len(c.get('enrolledStudents', []))}",
    ])
    if not c.get('isActive', True):
        lines.append('(inactive)')
    return '\n'.join(lines)


def render_stats(stats):
    return '\n'.join([
        f"Total classes:    {stats.get('totalClasses', 0)}",
        f"Live classes:     {stats.get('liveClasses', 0)}",
        f"Recorded classes: {stats.get('recordedClasses', 0)}",
        f"Enrolled:         {stats.get('enrolledClasses', 0)}",
        f"Total views:      {stats.get('totalViews', 0)}",
    ])


def render_users(users):
    if not users:
        return 'No students found.'
    rows = [[u.get('_id'), u.get('name'), u.get('email'), u.get('role'),
             len(u.get('enrolledClasses', [])), _when(u.get('createdAt'))] for u in users]
    return _table(['ID', 'Name', 'Email', 'Role', 'Classes', 'Joined'], rows)


def render_dashboard(data):
    stats = data.get('stats', {})
    parts = [
        'Overview',
        f"  Students:     {stats.get('totalUsers', 0)}",
        f"  Classes:      {stats.get('totalClasses', 0)}",
        f"  Live classes: {stats.get('liveClasses', 0)}",
        f"  Total views:  {stats.get('totalViews', 0)}",
        '',
        'Recent students',
    ]
    recent = data.get('recentUsers', [])
    parts.append(_table(['Name', 'Email', 'Joined'],
                        [[u.get('name'), u.get('email'), _when(u.get('createdAt'))] for u in recent])
                 if recent else '  none')
    parts.extend(['', 'Popular classes'])
    popular = data.get('popularClasses', [])
    parts.append(_table(['Title', 'Views', 'Students'],
                        [[c.get('title'), c.get('views', 0), len(c.get('enrolledStudents', []))] for c in popular])
                 if popular else '  none')
    parts.extend(['', 'Classes by category'])
    categories = data.get('categoryStats', [])
    parts.append(_table(['Category', 'Classes'], [[c.get('_id'), c.get('count')] for c in categories])
                 if categories else '  none')
    return '\n'.join(parts)
