from .handler import main

raise SystemExit(main())
