from vacation.main import main

raise SystemExit(main())
