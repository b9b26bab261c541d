from arealock.main import main

raise SystemExit(main())
