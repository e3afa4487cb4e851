"""SchoolHub: enrollment approval, attendance and exam marks for a single school."""
